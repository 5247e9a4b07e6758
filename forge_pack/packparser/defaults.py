# Those are the flags shared by the command line and the config file
DEFAULTS_FLAG_IN_CONFIG = {
    "target": ".",
    "framework": None,
    "out_directory": None,
    "export_dir": "./deployers",
    "build": False,
    "npx_disable": False,
    "pragma": ">=0.8.0",
    "solc": None,
    "no_metadata": False,
    "no_disambiguate": False,
    "deployer": None,
}
