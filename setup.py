from setuptools import setup, find_packages

setup(
    name="wraptrace",
    version="1.0.0",
    author="Sanic Community",
    author_email="tronic@noreply.users.github.com",
    description="Merged, de-duplicated stack traces for chains of wrapped errors",
    long_description=open("README.md", encoding="UTF-8").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/sanic-org/wraptrace",
    packages=find_packages(include=["wraptrace", "wraptrace.*"]),
    package_data={"wraptrace": ["style.css"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "License :: Public Domain",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=["html5tagger>=1.2.1"],
    extras_require={
        "test": ["pytest", "beautifulsoup4", "coverage"],
    },
    include_package_data=True,
)
