from setuptools import setup, find_packages
setup(
    name="opa_lookup",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "pydantic>=2",
        "requests",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        'console_scripts': [
            'opa_lookup=opa_lookup.__main__:main'
        ]
    }
)
