from setuptools import setup, find_packages

setup(
    name="photo-optimizer",
    version="1.0.0",
    description="Content-addressed JPEG optimize-and-publish pipeline for S3 and CloudFront",
    author="Photo Optimizer Team",
    packages=find_packages(include=["photo_optimizer", "photo_optimizer.*"]),
    install_requires=[
        "boto3>=1.34.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "moto[s3,cloudfront]>=5.0.0",
            "Pillow>=10.0.0",
        ],
    },
    python_requires=">=3.11",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.12",
    ],
)
