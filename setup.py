"""Setup script for the LST air temperature package."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="lst_airtemp",
    version="1.0.0",
    author="LST Air Temperature Developers",
    description="Air temperature maps from MODIS land surface temperature calibrated against ERA5",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/example/lst_airtemp",
    packages=find_packages(include=["lst_airtemp", "lst_airtemp.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21.0",
        "pandas>=1.3.0",
        "xarray>=0.19.0",
        "rasterio>=1.2.0",
        "affine>=2.3,<3.0",
        "rioxarray>=0.8.0",
        "geopandas>=0.10.0",
        "shapely>=1.8.0",
        "matplotlib>=3.4.0",
        "seaborn>=0.12.0",
        "click>=8.0.0",
        "pyyaml>=6.0",
        "loguru>=0.6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=3.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "airtemp=lst_airtemp.cli.interface:cli",
        ],
    },
    include_package_data=True,
)
