"""
Readable labels derived from image URLs.
"""

from urllib.parse import urlsplit


def breed_folder_from_url(url: str) -> str:
    """Return the folder segment holding the image.

    ``https://images.dog.ceo/breeds/hound-afghan/n02088094_1003.jpg`` -> ``hound-afghan``
    """
    parts = [part for part in urlsplit(url).path.split("/") if part]
    if len(parts) < 2:
        return ""
    return parts[-2]


def nice_breed_name_from_folder(folder: str) -> str:
    """``hound-afghan`` -> ``Afghan Hound``: sub-breed first, words capitalized."""
    words = [word for word in folder.split("-") if word]
    return " ".join(word.capitalize() for word in reversed(words))


def nice_breed_alt_from_folder(folder: str) -> str:
    name = nice_breed_name_from_folder(folder)
    return f"{name} dog" if name else "Dog"


def alt_text_for_url(url: str) -> str:
    return nice_breed_alt_from_folder(breed_folder_from_url(url))
