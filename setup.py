from setuptools import setup

setup(
    name='drop-stack-engine',
    version='0.1.0',
    python_requires='>=3.10',
    packages=['drop_stack_engine',
              'drop_stack_engine.batch',
              'drop_stack_engine.config',
              'drop_stack_engine.env',
              'drop_stack_engine.utils'],
    py_modules=['main'],
    install_requires=[
        'numpy',
        'google-cloud-storage',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
