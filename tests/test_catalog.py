from anagrammer.core import WordCatalog, build_catalog, is_catalog_word


def test_catalog_filters_single_letters_and_vowelless_entries():
    catalog = build_catalog([" Apple ", "b", "a", "I", "rhythm", "crwth", "", "tsk"])

    assert catalog.words == ("rhythm", "apple", "a", "i")


def test_catalog_orders_longest_first_keeping_source_order_for_ties():
    catalog = build_catalog(["dog", "cat", "bird", "ox", "eel"])

    assert list(catalog) == ["bird", "dog", "cat", "eel", "ox"]


def test_catalog_removes_duplicates_after_normalising():
    catalog = build_catalog(["tea", "Tea ", "ate", "TEA"])

    assert catalog.words == ("tea", "ate")
    assert len(catalog) == 2


def test_catalog_exclusions_are_normalised():
    catalog = build_catalog(["Listen", "silent"], exclusions=[" LISTEN ", ""])

    assert "listen" not in catalog
    assert catalog.words == ("silent",)


def test_catalog_construction_is_idempotent():
    raw = ["stop", "pots", "tops", "spot", "post", "opts", "Stop", "o", "so"]

    first = build_catalog(raw, exclusions={"opts"})
    second = build_catalog(raw, exclusions={"opts"})

    assert first == second
    assert first.words == second.words


def test_is_catalog_word_rules():
    assert is_catalog_word("a")
    assert is_catalog_word("i")
    assert not is_catalog_word("x")
    assert is_catalog_word("sly")
    assert not is_catalog_word("nth")
    assert not is_catalog_word("tea", frozenset({"tea"}))


def test_word_catalog_behaves_like_a_sequence():
    catalog = WordCatalog(["listen", "tin"])

    assert catalog[0] == "listen"
    assert catalog[-1] == "tin"
    assert "tin" in catalog
    assert repr(catalog) == "WordCatalog(size=2)"
