from setuptools import setup, find_packages

setup(
    name="vig",
    version="1.0.0",
    description="A tool to turn a video into a single gallery image of evenly spaced thumbnails.",
    author="Alvin Kwabena",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "opencv-python",
        "Pillow>=10.1",
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'vig=vig.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.8',
)
