"""
Enrollment Document Verification service.
Installs the API modules under services/api so they import the same way the
server and the tests import them (`main`, `settings`, `core.*`, ...).
"""

from setuptools import setup, find_namespace_packages

API_DIR = "services/api"

setup(
    name="enrollment-verification",
    version="1.0.0",
    description="Document verification console for student enrollment records",
    package_dir={"": API_DIR},
    packages=find_namespace_packages(
        where=API_DIR,
        include=["core", "core.*", "models", "models.*", "schemas", "schemas.*",
                 "routers", "routers.*", "adapters", "adapters.*"],
    ),
    py_modules=["main", "settings"],
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2",
        "pydantic-settings",
        "httpx",
        "cachetools",
        "pypdfium2",
        "Pillow",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
