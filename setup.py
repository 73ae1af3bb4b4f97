from setuptools import setup, find_packages

setup(
    name="relodm",
    version="0.1",
    author='Pavel Schudel',
    author_email='pavel1860@gmail.com',
    description="Relation-aware document mapper for MongoDB built on pydantic models",
    packages=find_packages(exclude=["__tests__", "__tests__.*"]),
    install_requires=[
        "pydantic>=2.8.2, <3",
        "pymongo>=4.6",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "mongomock>=4.1",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.11',
)
