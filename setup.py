from setuptools import setup, find_packages

setup(
    name="llmgraph",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src", exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2.0",
        "mirascope>=1.0,<2",
        "aiohttp>=3.9",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
        "examples": [
            "python-dotenv",
        ],
    },
    python_requires=">=3.9",
    # Add metadata for PyPI
    author="llmgraph developers",
    description="lightweight DAG orchestration of function and LLM nodes over a shared typed state",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
