from setuptools import find_packages, setup

# yapf: disable
setup(
    name="promverify",
    version="0.1.0",
    description="Black-box verification that a Prometheus deployment scrapes the expected targets and series",
    packages=find_packages(include=["promverify", "promverify.*"]),
    python_requires=">=3.8",
    install_requires=[
        'prometheus_client>=0.17',
        'PyYAML>=5.4',
        'requests>=2.25',
    ],
    extras_require={
        'test': [
            'pytest>=7',
        ],
    },
    entry_points={
        'console_scripts': [
            'promverify=promverify.__main__:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
    ]
)
