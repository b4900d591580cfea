from setuptools import setup

setup(
    name="flowtest",
    version="0.1.0",
    packages=["flowtest", "flowtest.commands"],
    install_requires=[
        "click>=8.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pyfakefs>=5.0.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "flowtest=flowtest.__main__:main",
        ]
    },
  )
