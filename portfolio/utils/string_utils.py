import re
import unicodedata


def slugify(value: str) -> str:
    """
    Transforme un titre en fragment de nom de fichier:
    - retire les accents
    - passe en minuscules
    - remplace tout ce qui n'est pas alphanumérique par un tiret
    Exemple: 'Été à Giverny' -> 'ete-a-giverny'
    """
    if value is None:
        return ""
    s = unicodedata.normalize('NFKD', str(value))
    s = ''.join(ch for ch in s if not unicodedata.combining(ch))
    s = s.lower()
    s = re.sub(r'[^a-z0-9]+', '-', s)
    return s.strip('-')


def split_tags(value: str) -> list:
    """'abstract, contemporary,' -> ['abstract', 'contemporary']"""
    if not value:
        return []
    return [tag.strip() for tag in value.split(',') if tag.strip()]
