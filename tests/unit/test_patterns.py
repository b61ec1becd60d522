from voucher_verifier.extraction.patterns import (
    FOLIO_LABEL_RE,
    PAYLOAD_BARE_CODE_RE,
    TEXT_BARE_CODE_RE,
    find_code,
    normalize_code,
    path_segment_pattern,
)

TEXT_PATTERNS = (FOLIO_LABEL_RE, TEXT_BARE_CODE_RE)


class TestFindCodeInText:
    def test_labeled_code(self) -> None:
        assert find_code("FOLIO CP-143-00001", TEXT_PATTERNS) == "CP-143-00001"

    def test_label_is_case_insensitive_and_result_uppercased(self) -> None:
        assert find_code("folio cp-143-00001", TEXT_PATTERNS) == "CP-143-00001"

    def test_label_allows_any_whitespace(self) -> None:
        assert find_code("FOLIO\n\t CP-143-00001", TEXT_PATTERNS) == "CP-143-00001"

    def test_labeled_code_wins_over_earlier_bare_code(self) -> None:
        text = "Ref AB-111-22222 ... FOLIO CP-143-00001"
        assert find_code(text, TEXT_PATTERNS) == "CP-143-00001"

    def test_falls_back_to_bare_code(self) -> None:
        assert find_code("Vale RT-001-00099 emitido", TEXT_PATTERNS) == "RT-001-00099"

    def test_returns_none_without_code(self) -> None:
        assert find_code("Vale sin folio", TEXT_PATTERNS) is None

    def test_rejects_wrong_digit_counts(self) -> None:
        assert find_code("CP-14-00001 CP-143-0001", TEXT_PATTERNS) is None


class TestFindCodeInPayload:
    def test_path_segment_code(self) -> None:
        patterns = (path_segment_pattern("vale/"), PAYLOAD_BARE_CODE_RE)
        payload = "https://verify.example.com/vale/CP-143-00001"
        assert find_code(payload, patterns) == "CP-143-00001"

    def test_path_segment_preferred_over_other_codes(self) -> None:
        patterns = (path_segment_pattern("vale/"), PAYLOAD_BARE_CODE_RE)
        payload = "https://host/AB-111-22222/vale/RT-001-00099"
        assert find_code(payload, patterns) == "RT-001-00099"

    def test_bare_fallback_is_case_insensitive(self) -> None:
        patterns = (path_segment_pattern("vale/"), PAYLOAD_BARE_CODE_RE)
        assert find_code("https://host/v/rt-001-00099", patterns) == "RT-001-00099"

    def test_fragment_is_matched_literally(self) -> None:
        pattern = path_segment_pattern("v.le/")
        assert pattern.search("https://host/vale/CP-143-00001") is None


class TestNormalizeCode:
    def test_uppercases_and_trims(self) -> None:
        assert normalize_code("  cp-143-00001 ") == "CP-143-00001"

    def test_rejects_malformed(self) -> None:
        assert normalize_code("CP-143-0001") is None
        assert normalize_code("FOLIO CP-143-00001") is None
        assert normalize_code("") is None
