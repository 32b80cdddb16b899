from setuptools import setup, find_packages

setup(
    name="mkdocs-doxymd",
    version="0.3.0",
    description="MkDocs plugin and converter for Doxygen comments to Markdown",
    keywords="mkdocs doxygen markdown c cpp documentation python",
    packages=find_packages(exclude=["tests"]),
    python_requires=">=3.9",
    install_requires=[
        "mkdocs>=1.4",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers = [
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Documentation",
        "Topic :: Software Development :: Documentation",
        "Framework :: MkDocs",
    ],
    entry_points={
        "mkdocs.plugins": [
            "doxymd = mkdocs_doxymd.plugin:DoxymdPlugin",
        ],
    },
)
