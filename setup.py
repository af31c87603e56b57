# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="sitesmith",
    version="1.0.0",
    description="Static site build pipeline: JSON data tree, Jinja2 pages, asset bundling, dev server",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["sitesmith", "sitesmith.*"]),
    install_requires=[
        "Jinja2>=3.1",
        "minify-html>=0.15",
        "rjsmin>=1.2",
        "csscompressor>=0.9.5",
        "Pillow>=10.0",
        "requests>=2.31",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
    entry_points={
        'console_scripts': [
            'sitesmith=sitesmith.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
