from setuptools import find_packages, setup

version = None
with open("chunked_uploader/__init__.py", encoding="utf-8") as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.strip().split()[-1][1:-1]
            break
assert version is not None, "Could not find version string"

with open("README.md", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="chunked-uploader",
    version=version,
    description="Chunked upload of unknown-length streams via server-side compose",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.10",
    install_requires=[
        "google-auth>=2.0",
        "google-cloud-storage>=2.10.0",
        "pydantic>=2.0",
        "pyyaml>=6.0.1",
    ],
    extras_require={
        "dev": [
            "pytest>=6.2.5",
            "pytest-cov>=2.12.1",
            "pre-commit",
        ],
    },
    entry_points={
        "console_scripts": [
            "chunked-upload = chunked_uploader.main:main",
        ]
    },
    keywords="gcs object-storage upload compose chunked",
)
