from setuptools import setup, find_packages
from pathlib import Path

setup(
    name="hotspot_tour",
    version=Path("./hotspot_tour/VERSION").read_text().strip(),
    packages=find_packages(include=["hotspot_tour", "hotspot_tour.*"]),
    package_data={"hotspot_tour": ["VERSION"]},
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "opencv-python-headless",
        "easydict",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["hotspot_tour=hotspot_tour.cli:main"],
    },
)
