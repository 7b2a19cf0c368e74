import setuptools

try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "Build uploaded static site archives and publish them to S3"

setuptools.setup(
    name="static-site-builder",
    version="0.1.0",
    description="Build uploaded static site archives and publish them to S3",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src", include=["static_site_builder", "static_site_builder.*"]),
    install_requires=[
        "boto3",
        "pydantic>=2",
        "python-dotenv",
        "rich",
        "typer",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "site-builder=static_site_builder.cli.main:app",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
)
