"""
Module containing all the platforms
"""
from .foundry import Foundry
from .hardhat import Hardhat
