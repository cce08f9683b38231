from setuptools import find_packages, setup

setup(
    name="llmgate",
    version="0.1.0",
    description="Session gate and OpenAI provider adapter with batched, all-or-nothing embeddings",
    packages=find_packages(include=["llmgate", "llmgate.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.4"],
    },
    include_package_data=True,
)
