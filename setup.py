from setuptools import setup, find_packages

setup(
    name="mediaparse",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"mediaparse": ["config.yaml"]},
    install_requires=[
        "requests",
        "urllib3>=2.3",
        "scrapy",
        "playwright",
        "playwright-stealth>=1.0.6,<2",
        "MainContentExtractor",
        "pydantic>=2",
        "python-dateutil",
        "tinydb",
        "pyyaml",
        "python-dotenv",
        "rich",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "mediaparse=mediaparse.cli:main",
        ],
    },
    python_requires=">=3.9",
)
