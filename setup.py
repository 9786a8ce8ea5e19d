from setuptools import setup, find_packages

setup(
    name="bq-acl-pivot",
    version="0.1",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "google-cloud-storage>=2.14.0",
        "google-cloud-bigquery>=3.17.1",
        "google-api-core>=2.11.0",
        "pyyaml>=6.0.1",
        "pandas>=2.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
)
