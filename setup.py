from setuptools import setup, find_packages

setup(
    name="review_packets",
    version="0.1.0",
    packages=find_packages(include=["review_packets", "review_packets.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "review-packets=review_packets.cli:main",
        ],
    },
    author="Uday Kanth",
    description="Slice unified diffs into review packets that cover every changed line once.",
)
