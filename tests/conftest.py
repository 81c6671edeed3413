import pytest

from cryptool.classical import register_all

ENGLISH_SAMPLE = (
    "It was the best of times and the worst of times for the people who lived near the old harbour. "
    "Every morning the fishermen went down to the water before the sun rose, and every evening they "
    "returned with their nets full or empty, depending on the weather and on the mood of the sea. "
    "The children of the village would wait on the stone steps near the market to see the boats come "
    "in, and the older ones would help to carry the heavy baskets up the narrow streets to the houses "
    "where their mothers were waiting. There was a school at the top of the hill, and the teacher was "
    "a patient woman who believed that every child should learn to read and write before the age of "
    "seven. She would often tell them stories about the great cities across the ocean, where the "
    "streets were lit at night and the trains moved faster than the wind. Most of the children did "
    "not believe her, but they listened anyway, because her voice was gentle and her stories were "
    "better than the work that waited for them at home. In the winter the storms came in from the "
    "west and the whole village would close the shutters and sit together near the fire, telling "
    "the same old tales of shipwrecks and treasure and the strange lights that were sometimes seen "
    "over the rocks at the entrance of the bay. The priest said that the lights were only the "
    "reflection of the moon on the water, but the old sailors knew better and never went out when "
    "they were seen. When spring returned the nets were mended, the boats were painted again, and "
    "the young men who had left for the city in the autumn often came back, tired of the noise and "
    "the smoke, to take their place once more beside their fathers on the water. Nothing ever really "
    "changed in that place, and perhaps that was the reason why the people there seemed to be "
    "content with their simple lives and their quiet evenings beside the sea."
)


@pytest.fixture(scope="session", autouse=True)
def _plugins():
    register_all()


@pytest.fixture
def english_text():
    return ENGLISH_SAMPLE
