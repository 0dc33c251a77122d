# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- CONFIG ---
    "pydantic>=2.0.0",
    "pyyaml>=6.0.0",
    "python-dotenv>=1.0.0",

    # --- TESTS---
    "pytest-asyncio==1.3.0",
    "pytest"
]

setup(
    name="lifecell",
    version="0.1.0",
    description="Lifecycle-scoped reactive state container",
    packages=find_packages(include=["lifecell", "lifecell.*"]),
    include_package_data=True,
    package_data={"lifecell.shared.config": ["settings/*.yaml"]},
    install_requires=install_requires,
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "lifecell-demo=lifecell.counter.main:main",
        ],
    },
)
