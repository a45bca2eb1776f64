from studycards.services.generator import MockProposalGenerator, build_mock_proposals, suggest_folder_name


def test_short_text_gets_filler_proposal():
    result = build_mock_proposals("Photosynthesis converts light.")

    assert len(result.flashcards_proposals) == 2
    assert result.flashcards_proposals[0].back == "The text contains approximately 3 words and 30 characters."
    assert all(p.generation_source == "ai" for p in result.flashcards_proposals)


def test_long_text_adds_topic_and_key_point():
    first = "Cells are the basic structural and functional units of every living organism on Earth"
    text = f"{first}. " + " ".join(["Membranes separate the inside from the outside."] * 8)

    result = build_mock_proposals(text)

    fronts = [p.front for p in result.flashcards_proposals]
    assert "What is the main topic discussed in this text?" in fronts
    assert result.flashcards_proposals[-1].back == first
    assert len(result.flashcards_proposals) == 3


def test_suggested_folder_name_truncates_long_words():
    assert suggest_folder_name("Biology chapter one notes") == "Study Notes - Biology chapter one"
    long_words = "Pneumonoultramicroscopicsilicovolcanoconiosis is long"
    assert suggest_folder_name(long_words) == long_words[:30] + "..."


async def test_mock_generator_without_delay():
    result = await MockProposalGenerator(delay_seconds=0).generate("Some study text here.")

    assert result.suggested_folder_name.startswith("Study Notes - ")
    assert len(result.flashcards_proposals) >= 2
