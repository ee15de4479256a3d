# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- CONFIG & MODELS ---
    "pydantic>=2.0.0",
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",

    # --- UTILS ---
    "httpx>=0.27.0",  # Firebase Identity Toolkit / Realtime Database REST
]

extras_require = {
    # --- TESTS---
    "test": [
        "pytest",
        "pytest-asyncio>=1.0.0",
    ],
}

setup(
    name="storefront-account-client",
    version="0.9.0",
    description="Storefront account and session client core",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"storefront.shared.config": ["settings/*.yaml"]},
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.11",
)
