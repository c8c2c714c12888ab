import pytest

from komplexaci.services.champion_service import ChampionDataService

CHAMPIONS = {
    "data": {
        "Aatrox": {"id": "Aatrox", "key": "266", "name": "Aatrox", "title": "the Darkin Blade", "tags": ["Fighter"]},
        "Ahri": {"id": "Ahri", "key": "103", "name": "Ahri", "title": "the Nine-Tailed Fox", "tags": ["Mage"]},
        "MonkeyKing": {"id": "MonkeyKing", "key": "62", "name": "Wukong", "title": "the Monkey King", "tags": ["Fighter"]},
    }
}


@pytest.fixture
def ddragon(riot_stub):
    riot_stub.add("/api/versions.json", ["14.1.1", "14.0.1"])
    riot_stub.add("/cdn/14.1.1/data/en_US/champion.json", CHAMPIONS)
    return riot_stub


@pytest.fixture
def champions(http_client, clock):
    return ChampionDataService(http_client, ttl=3600, clock=clock)


class TestChampionDataService:

    async def test_lookup_by_id_and_name(self, champions, ddragon):
        assert await champions.get_champion_name(266) == "Aatrox"
        assert (await champions.get_champion_by_name("wukong"))["id"] == "MonkeyKing"
        assert (await champions.get_champion_by_name("MonkeyKing"))["key"] == "62"
        assert champions.version == "14.1.1"

    async def test_unknown_champion(self, champions, ddragon):
        assert await champions.get_champion_name(9999) == "Champion 9999"
        assert await champions.get_champion_image(9999) == ""

    async def test_image_urls(self, champions, ddragon):
        image = await champions.get_champion_image(62)

        assert image == "https://ddragon.leagueoflegends.com/cdn/14.1.1/img/champion/MonkeyKing.png"
        assert champions.champion_splash_url("Ahri") == (
            "https://ddragon.leagueoflegends.com/cdn/img/champion/splash/Ahri_0.jpg"
        )

    async def test_data_is_cached_for_an_hour(self, champions, ddragon, clock):
        await champions.get_champion_data()
        clock.advance(3599)
        await champions.get_champion_data()
        assert ddragon.calls("champion.json") == 1

        clock.advance(2)
        await champions.get_champion_data()
        assert ddragon.calls("champion.json") == 2

    async def test_stale_data_survives_failed_refresh(self, champions, ddragon, clock):
        await champions.get_champion_data()
        clock.advance(3601)
        ddragon.error("/cdn/14.1.1/data/en_US/champion.json", 500, "down")

        assert await champions.get_champion_name(103) == "Ahri"

    async def test_version_fallback(self, champions, riot_stub):
        riot_stub.error("/api/versions.json", 500, "down")
        riot_stub.add("/cdn/15.10.1/data/en_US/champion.json", CHAMPIONS)

        assert await champions.get_champion_name(103) == "Ahri"
        assert champions.version == "15.10.1"

    async def test_enrich_mastery_and_match(self, champions, ddragon):
        mastery = await champions.enrich_mastery({"championId": 103, "championLevel": 7})
        assert mastery["championName"] == "Ahri"
        assert mastery["championImage"].endswith("/img/champion/Ahri.png")
        assert mastery["championLevel"] == 7

        match = await champions.enrich_match({
            "metadata": {"matchId": "EUW1_1"},
            "info": {"gameMode": "CLASSIC", "participants": [{"championId": 266}, {"championId": 1}]},
        })
        participants = match["info"]["participants"]
        assert [p["championName"] for p in participants] == ["Aatrox", "Champion 1"]
        assert match["info"]["gameMode"] == "CLASSIC"

    async def test_all_champions_sorted_by_name(self, champions, ddragon):
        listing = await champions.get_all_champions()

        assert [c["name"] for c in listing] == ["Aatrox", "Ahri", "Wukong"]
        assert listing[0]["tags"] == ["Fighter"]
        assert listing[2]["square"].endswith("/MonkeyKing.png")

    async def test_failed_refresh_waits_before_retrying(self, champions, ddragon, clock):
        await champions.get_champion_data()
        clock.advance(3601)
        ddragon.error("/cdn/14.1.1/data/en_US/champion.json", 500, "down")

        for champion_id in (266, 103, 62):
            await champions.get_champion_name(champion_id)
        assert ddragon.calls("champion.json") == 2

        clock.advance(59)
        await champions.get_champion_name(266)
        assert ddragon.calls("champion.json") == 2

        clock.advance(2)
        ddragon.add("/cdn/14.1.1/data/en_US/champion.json", CHAMPIONS)
        assert await champions.get_champion_name(266) == "Aatrox"
        assert ddragon.calls("champion.json") == 3

    async def test_outage_without_data_is_not_hammered(self, champions, riot_stub, clock):
        riot_stub.add("/api/versions.json", ["14.1.1"])
        riot_stub.error("/cdn/14.1.1/data/en_US/champion.json", 503, "down")

        match = await champions.enrich_match({
            "info": {"participants": [{"championId": 266}, {"championId": 103}, {"championId": 62}]},
        })

        assert [p["championName"] for p in match["info"]["participants"]] == [
            "Champion 266", "Champion 103", "Champion 62",
        ]
        assert riot_stub.calls("champion.json") == 1
        assert riot_stub.calls("versions.json") == 1
