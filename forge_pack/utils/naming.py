"""
Module handling the naming of libraries (keys, generated identifiers)
"""


def combine_filename_name(filename: str, name: str) -> str:
    """Combine the declaring filename with the library name

    Args:
        filename (str): filename
        name (str): library name

    Returns:
        str: Combined names
    """
    return filename + ":" + name


def make_identifier(library_name: str) -> str:
    """Derive the identifier used in generated code for a library: MathLib -> mathLib

    Args:
        library_name (str): bare library name

    Returns:
        str: library name with its first character lowercased
    """
    return library_name[:1].lower() + library_name[1:]
