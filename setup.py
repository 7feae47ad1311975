from setuptools import setup, find_packages

setup(
    name="crmclient",
    version="0.1.0",
    description="Pyodide client for the CRM backend: auth, clients and invoices",
    author="CRM Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
)
