from setuptools import setup, find_packages


with open("README.md", "r") as f:
    long_description = f.read()

setup(name='tweetpipe',
      version='0.1.0',
      description='Lambdas to flatten tweets to S3 and forward batches of them to sentiment analysis',
      long_description=long_description,
      long_description_content_type="text/markdown",
      author='tweetpipe contributors',
      license='MIT',
      classifiers=[
          'Development Status :: 4 - Beta',
          'Operating System :: Other OS',
          'License :: OSI Approved :: MIT License',
          'Programming Language :: Python :: 3.8',
          'Programming Language :: Python :: 3.9',
          'Programming Language :: Python :: 3.10',
          'Programming Language :: Python :: 3.11',
          'Topic :: Software Development'
      ],
      packages=find_packages(exclude=['docs', 'test', 'examples', "*.test", "*.test.*"]),
      install_requires=[
          'boto3>=1.20'
      ],
      extras_require={
          'test': ['pytest'],
      })
