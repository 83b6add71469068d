"""
Tests for the informativeness filter and sentence ranking
"""
from quizsmith.models import CandidateSentence, KeyPhrase
from quizsmith.services.ranking import is_informative, rank_sentences, score_sentence


def _sentences(*texts):
    return [CandidateSentence(text=t, paragraph=i, position=5) for i, t in enumerate(texts)]


class TestIsInformative:
    def test_markers(self):
        assert is_informative("Osmosis refers to the movement of water across a membrane.")
        assert is_informative("Prices rose because demand grew.")
        assert is_informative("Unlike cats, dogs bark.")
        assert is_informative("About 40% of voters stayed home.")
        assert is_informative("Finally, the committee voted.")
        assert is_informative("According to the survey, people walk more.")

    def test_plain_sentence(self):
        assert not is_informative("Dogs bark loudly at night.")


class TestScoreSentence:
    def test_phrase_weights_by_rank(self):
        phrases = [KeyPhrase("osmosis", 3.0, 3), KeyPhrase("membrane", 2.0, 2)]
        first = CandidateSentence(text="Dogs chase osmosis.", position=5)
        second = CandidateSentence(text="Dogs chase membrane.", position=5)
        assert score_sentence(first, phrases) == 1.0
        assert score_sentence(second, phrases) == 0.5

    def test_lead_position_bonus(self):
        lead = CandidateSentence(text="Dogs bark.", position=0)
        later = CandidateSentence(text="Dogs bark.", position=3)
        assert score_sentence(lead, []) - score_sentence(later, []) == 0.3


class TestRankSentences:
    def test_widens_pool_when_few_informative(self):
        sentences = _sentences("Dogs bark loudly at night.", "Cats nap during sunny afternoons.",
                               "Osmosis is the movement of water.")
        ranked = rank_sentences(sentences, [], count=5)
        assert len(ranked) == 3
        assert ranked[0].text == "Osmosis is the movement of water."

    def test_filters_when_enough_informative(self):
        sentences = _sentences("Dogs bark loudly at night.", "Osmosis is the movement of water.",
                               "Diffusion is a passive process.")
        ranked = rank_sentences(sentences, [], count=1)
        assert [s.text for s in ranked] == ["Osmosis is the movement of water.",
                                            "Diffusion is a passive process."]

    def test_stable_for_ties(self):
        sentences = _sentences("Dogs bark loudly at night.", "Cats nap during sunny afternoons.")
        ranked = rank_sentences(sentences, [], count=3)
        assert [s.text for s in ranked] == [s.text for s in sentences]

    def test_scores_attached(self):
        phrases = [KeyPhrase("osmosis", 1.0, 1)]
        ranked = rank_sentences(_sentences("Osmosis is the movement of water."), phrases, count=1)
        assert ranked[0].score > 1.0
