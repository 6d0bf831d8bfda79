from setuptools import setup, find_packages

setup(
    name="reelcheck",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    include_package_data=True,
    install_requires=[
        "playwright>=1.40.0",
        "pytest>=7.4.0",
        "pydantic>=2.5.0",
        "python-dotenv>=1.0.0",
        "click>=8.1.7",
        "rich>=13.7.0",
        "requests>=2.31.0",
    ],
    entry_points={
        "console_scripts": [
            "reelcheck=main:cli",
        ],
    },
    python_requires=">=3.10",
    description="Per-worker Playwright sessions and page models for TMDB end-to-end tests",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Framework :: Pytest",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
