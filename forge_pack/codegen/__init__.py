"""
Init module
"""

from .deploy_helper import DEPLOY_HELPER_FILENAME, DEPLOY_HELPER_SOL
from .deployer import DEFAULT_PRAGMA, GenerateOptions, deployer_name, generate_deployer
