from setuptools import setup, find_packages

setup(
    name="omnibrowser",
    version="1.0.0",
    description="One browser automation interface over Playwright and Selenium",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "playwright>=1.40.0",
        "selenium>=4.11.0",
        "webdriver-manager>=4.0.0",
        "selenium-stealth>=1.0.6",
        "undetected-chromedriver>=3.5.5",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'omnibrowser=omnibrowser.__main__:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
