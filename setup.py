from setuptools import setup, find_namespace_packages

setup(
    name="library_ledger",
    version="0.1.0",
    packages=find_namespace_packages(include=['cli*', 'ledger*']),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "pydantic>=2",
    ],
    extras_require={
        "postgres": ["psycopg2-binary"],
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "library-ledger=cli.main:main",
        ],
    },
)
