from setuptools import setup, find_packages

setup(
    name="skillswap-lifecycle",
    version="0.1",
    python_requires=">=3.11",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy",
        "psycopg2-binary",
        "pydantic",
        "pydantic-settings",
        "python-dotenv",
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
