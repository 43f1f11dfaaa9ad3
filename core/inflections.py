"""Folding of verb + auxiliary chains into single inflected surface forms.

MeCab splits 食べませんでした into 食べ / ませ / ん / でし / た. For frequency
counting we want 食べませんでした as one surface form, and we want to know how
often each ending (ませんでした) was used.
"""

from collections import Counter

from core.tokenizer import Token

VERB_POS = "動詞"

# (tokens following the verb, folded suffix).
# Order matters: the first rule whose tokens all match wins, so longer
# chains come before their prefixes (させ+られ+ない before させ+ない).
INFLECTION_RULES: list[tuple[tuple[str, ...], str]] = [
    (("ませ", "ん", "でし", "た"), "ませんでした"),
    (("させ", "られ", "ない"), "させられない"),
    (("られ", "ませ", "ん"), "られません"),
    (("させ", "ない"), "させない"),
    (("させ", "られる"), "させられる"),
    (("なかっ", "た"), "なかった"),
    (("なく", "て"), "なくて"),
    (("まし", "た"), "ました"),
    (("せ", "ない"), "せない"),
    (("ませ", "ん"), "ません"),
    (("られ", "ない"), "られない"),
    (("られ", "ます"), "られます"),
    (("れ", "ない"), "れない"),
    (("させる",), "させる"),
    (("せる",), "せる"),
    (("た",), "た"),
    (("だ",), "だ"),
    (("て",), "て"),
    (("で",), "で"),
    (("な",), "な"),
    (("ない",), "ない"),
    (("ます",), "ます"),
    (("られる",), "られる"),
    (("れる",), "れる"),
]

INFLECTION_SUFFIXES = [suffix for _, suffix in INFLECTION_RULES]


def match_rule(tokens: list[Token], index: int):
    """Find the first rule matching the tokens after tokens[index].

    Returns:
        (pattern, suffix) or None
    """
    for pattern, suffix in INFLECTION_RULES:
        end = index + 1 + len(pattern)
        if end > len(tokens):
            continue
        following = tokens[index + 1:end]
        if all(token.text == part for token, part in zip(following, pattern)):
            return pattern, suffix
    return None


def fold_inflections(tokens: list[Token]) -> tuple[list[Token], Counter]:
    """Merge each verb with the auxiliary chain that follows it.

    The merged token keeps the verb's POS and dictionary form.

    Returns:
        (folded tokens, Counter of folded suffixes)
    """
    result = []
    counts = Counter()

    i = 0
    while i < len(tokens):
        token = tokens[i]
        rule = match_rule(tokens, i) if token.pos == VERB_POS else None

        if rule is None:
            result.append(token)
            i += 1
            continue

        pattern, suffix = rule
        counts[suffix] += 1
        result.append(Token(token.text + suffix, token.pos, token.dictionary_form))
        i += 1 + len(pattern)

    return result, counts
