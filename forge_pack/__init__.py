"""
Init module
"""

from .artifact import Artifact, parse_artifact
from .bytecode import link_segments, segment_bytecode
from .codegen import GenerateOptions, generate_deployer
from .exceptions import ForgePackError
from .forge_pack import ForgePack, predict_library_addresses
from .resolver import ResolvedLibrary, resolve_libraries
