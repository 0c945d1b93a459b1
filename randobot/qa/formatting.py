"""
French answer rendering shared by every resolver stage
"""

from typing import Dict, Iterable, List

from ..crawl.models import Page


def _description(page: Page, max_length: int) -> str:
    if page.metadata.is_project_page:
        return "Pas de description disponible"
    text = (page.content or '').replace('**', '').strip()
    if not text:
        return "Pas de description disponible"
    if len(text) > max_length:
        text = text[:max_length].rsplit(' ', 1)[0] + '…'
    return text


def format_altitude(altitude) -> str:
    if isinstance(altitude, (int, float)) and not isinstance(altitude, bool):
        return f"{altitude}m"
    return "Non spécifiée"


def format_hike_card(page: Page, max_length: int = 400) -> str:
    """Title, date, altitude, location, description"""
    metadata = page.metadata
    return (
        f"**🏔️ {page.title}**\n"
        f"📅 {metadata.date or 'Date non spécifiée'}\n"
        f"⛰️ Altitude : {format_altitude(metadata.altitude)}\n"
        f"📍 {metadata.location or 'Non spécifié'}\n"
        f"📝 Description : {_description(page, max_length)}\n"
    )


def format_hike_listing(header: str, pages: Iterable[Page], max_length: int = 400) -> str:
    cards = [format_hike_card(page, max_length) for page in pages]
    return f"{header}\n\n" + "\n".join(cards)


def format_project_listing(projects: List[Dict[str, str]]) -> str:
    if not projects:
        return "Je n'ai pas trouvé de projets."

    lines = [f"📋 Il y a actuellement {len(projects)} projets prévus :", ""]
    for index, project in enumerate(projects, start=1):
        lines.append(f"{index}. 📅 {project.get('date') or 'Date non spécifiée'}")
        lines.append(f"   📍 **{project.get('title', '')}**")
        if project.get('description'):
            lines.append(f"   📝 {project['description']}")
        lines.append("")
    return "\n".join(lines).strip()


def plural(count: int, word: str) -> str:
    return f"{word}s" if count > 1 else word
