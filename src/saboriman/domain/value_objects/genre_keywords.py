"""Keyword table for inferring a genre from an album name.

Hey future me - ORDER MATTERS here! Some names hit several entries ("Rock Anime
Soundtrack" matches Rock, Soundtrack AND Anime). We walk the tuple top to bottom
and the first entry with a matching keyword wins, so this is a tuple and not a
dict on purpose. Keywords are lower-case and matched as substrings.
"""

UNKNOWN_GENRE = "Unknown"

GENRE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Classical", ("classical", "symphony", "concerto", "sonata", "古典")),
    ("Pop", ("pop", "流行")),
    ("Rock", ("rock", "摇滚")),
    ("Jazz", ("jazz", "爵士")),
    ("Electronic", ("electronic", "edm", "techno", "house", "电子")),
    ("Hip Hop", ("hip hop", "rap", "说唱")),
    ("Country", ("country", "乡村")),
    ("R&B", ("r&b", "soul")),
    ("Metal", ("metal", "金属")),
    ("Folk", ("folk", "民谣")),
    ("Soundtrack", ("soundtrack", "ost", "原声")),
    ("Anime", ("anime", "动漫", "アニメ")),
    ("Game", ("game", "游戏", "ゲーム")),
)


def match_genre_keyword(album_name: str) -> str | None:
    """Return the first genre whose keyword occurs in album_name, or None."""
    name = album_name.lower()
    if not name:
        return None
    for genre, keywords in GENRE_KEYWORDS:
        for keyword in keywords:
            if keyword in name:
                return genre
    return None
