"""
hierarchy/uganda.py

Static administrative lookup: region -> districts.
"""

from __future__ import annotations

from typing import Final

REGION_DISTRICTS: Final[dict[str, tuple[str, ...]]] = {
    "Central Region": (
        "Buikwe", "Bukomansimbi", "Butambala", "Buvuma", "Entebbe", "Gomba",
        "Kalangala", "Kalungu", "Kampala", "Kassanda", "Kayunga", "Kiboga",
        "Kyankwanzi", "Kyotera", "Luwero", "Lwengo", "Lyantonde", "Masaka",
        "Mityana", "Mpigi", "Mubende", "Mukono", "Nakaseke", "Nakasongola",
        "Rakai", "Ssembabule", "Wakiso",
    ),
    "Eastern Region": (
        "Amuria", "Budaka", "Bududa", "Bugiri", "Bugweri", "Bukedea", "Bukwo",
        "Bulambuli", "Busia", "Butaleja", "Butebo", "Buyende", "Iganga",
        "Jinja", "Kaberamaido", "Kalaki", "Kaliro", "Kamuli", "Kapchorwa",
        "Kapelebyong", "Katakwi", "Kibuku", "Kisoko", "Kumi", "Kween", "Luuka",
        "Manafwa", "Mayuge", "Mbale", "Mukuju", "Mulanda", "Namayingo",
        "Namisindwa", "Namutumba", "Ngora", "Pallisa", "Serere", "Sironko",
        "Soroti", "Tororo",
    ),
    "Northern Region": (
        "Abim", "Adjumani", "Agago", "Alebtong", "Amolatar", "Amudat", "Amuru",
        "Apac", "Arua", "Dokolo", "Gulu", "Kaabong", "Karenga", "Kitgum",
        "Koboko", "Kole", "Kotido", "Kwania", "Lamwo", "Lira", "Madi-Okollo",
        "Maracha", "Moroto", "Moyo", "Nabilatuk", "Nakapiripirit", "Napak",
        "Nebbi", "Nwoya", "Obongi", "Omoro", "Otuke", "Oyam", "Pader",
        "Pakwach", "Terego", "Yumbe", "Zombo",
    ),
    "Western Region": (
        "Bughendera", "Buhweju", "Buliisa", "Bundibugyo", "Bunyangabu",
        "Bushenyi", "Hoima", "Ibanda", "Isingiro", "Kabale", "Kabarole",
        "Kagadi", "Kakumiro", "Kamwenge", "Kanungu", "Kasese", "Kazo",
        "Kibaale", "Kikuube", "Kiruhura", "Kiryandongo", "Kisoro",
        "Kitagwenda", "Kyegegwa", "Kyenjojo", "Masindi", "Mbarara", "Mitooma",
        "Ntoroko", "Ntungamo", "Rubanda", "Rubirizi", "Rukiga", "Rukungiri",
        "Rwampara", "Sheema",
    ),
}
