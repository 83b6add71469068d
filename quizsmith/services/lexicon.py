"""
Fixed word lists used by the question synthesis heuristics
"""

STOPWORDS = set("""
a an the and or but if while with without within into onto from to of in on at by for as that this these those there here
is are was were be been being have has had do does did can could should would may might will shall it its itself himself herself themselves
about above below under over between among per via etc such than then so not no nor also more most less least very much many few each either neither both
which who whom whose what when where why how we you they he she i their our your his her them us me my done other however therefore thus hence
consequently whereas because since until upon onto only just even still yet some any all none every often usually
""".split())

DOMAIN_INDICATORS = {
    "process", "theory", "framework", "system", "method", "model", "principle",
    "concept", "structure", "function", "mechanism", "analysis", "approach",
    "strategy", "technique", "law", "effect", "cycle", "algorithm", "protocol",
}

# generic, domain-neutral padding for starved distractor pools
GENERIC_TERMS = [
    "concept", "process", "factor", "element", "system", "method", "theory",
    "principle", "structure", "function", "variable", "component", "pattern", "resource",
]

# nouns with no plausible connection to typical study material
UNRELATED_NOUNS = [
    "furniture", "weather", "music", "geography", "cooking", "astronomy",
    "fashion", "gardening", "sports", "poetry", "architecture", "sculpture",
]

UNRELATED_PROPER_NOUNS = [
    "Atlantis", "Napoleon", "Zanzibar", "Antarctica", "Mozart", "Jupiter", "Kyoto", "Picasso",
]

GENERIC_SUBJECTS = ["the weather", "modern furniture", "classical music", "ocean tides"]

ANTONYMS = {
    "increase": "decrease", "increases": "decreases", "increased": "decreased",
    "decrease": "increase", "decreases": "increases", "decreased": "increased",
    "more": "less", "less": "more", "high": "low", "low": "high",
    "higher": "lower", "lower": "higher", "large": "small", "small": "large",
    "larger": "smaller", "smaller": "larger", "positive": "negative", "negative": "positive",
    "always": "never", "never": "always", "important": "unimportant",
    "effective": "ineffective", "efficient": "inefficient", "strong": "weak", "weak": "strong",
    "before": "after", "after": "before", "fast": "slow", "slow": "fast",
    "many": "few", "few": "many", "rise": "fall", "rises": "falls", "fall": "rise",
    "gain": "loss", "loss": "gain", "internal": "external", "external": "internal",
    "simple": "complex", "complex": "simple", "common": "rare", "rare": "common",
    "include": "exclude", "includes": "excludes", "first": "last", "last": "first",
    "major": "minor", "minor": "major", "early": "late", "late": "early",
    "critical": "irrelevant", "essential": "optional", "necessary": "unnecessary",
    "possible": "impossible", "stable": "unstable", "active": "passive",
    "light": "darkness", "heat": "cold", "absorb": "release", "absorbs": "releases",
    "convert": "preserve", "converts": "preserves", "produce": "consume", "produces": "consumes",
}
