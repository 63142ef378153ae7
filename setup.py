from setuptools import find_packages, setup

deps = [
    "boto3",
    "click",
    "click-aliases",
    "fastapi",
    "pillow>=9.1",
    "pydantic>=2",
    "pydantic-settings",
    "redis>=4.1",
    "requests",
    "requests-toolbelt",
    "uvicorn",
]

test_deps = [
    "httpx",
    "pytest",
]

setup(
    name="mediacache",
    version="0.1.0",
    python_requires=">=3.8",
    zip_safe=False,
    install_requires=deps,
    extras_require={"test": test_deps},
    include_package_data=True,
    packages=find_packages(exclude=["tests", "tests.*"]),
    entry_points={
        "console_scripts": [
            "mcache=mediacache.cli:cli",
            "mediacache-serve=mediacache.dev_cli:main",
        ],
    },
)
