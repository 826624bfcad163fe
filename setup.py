from setuptools import setup, find_packages

setup(
    name="notion-mcp",
    version="0.1.0",
    packages=find_packages(include=["notion_mcp", "notion_mcp.*"]),
    python_requires=">=3.11",
    install_requires=[
        "httpx>=0.27",
        "pydantic>=2.7",
        "pydantic-settings>=2.3",
        "mcp>=1.17,<2",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
            "respx>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "notion-mcp=notion_mcp.app.main:main",
        ],
    },
)
