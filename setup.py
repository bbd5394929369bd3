from setuptools import setup, find_packages

setup(
    name="h5p-store",
    version="0.1.0",
    description="Directory-backed storage for H5P content objects and their files",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "fsspec>=2023.1.0",
        "mmh3>=4.0.0",  # MurmurHash for file checksums
    ],
    extras_require={
        "s3": [
            "s3fs>=2023.1.0",
        ],
        "dev": [
            "pytest>=6.0.0",
            "black>=21.5b2",
            "pylint>=2.8.0",
        ],
    },
    python_requires=">=3.8",
)
