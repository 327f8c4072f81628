"""Tests for query-string encoding."""

from wpgate.wordpress.params import ListPostsParams
from wpgate.wordpress.query import encode_query


class TestEncodeQuery:
    """Test WordPress query conventions."""

    def test_empty_and_none(self) -> None:
        """No parameters (or only None values) yield an empty string."""
        assert encode_query(None) == ""
        assert encode_query({}) == ""
        assert encode_query({"search": None, "page": None}) == ""

    def test_none_values_are_omitted(self) -> None:
        assert encode_query({"per_page": 20, "search": None}) == "?per_page=20"

    def test_lists_become_comma_separated(self) -> None:
        """Lists encode as one value with a literal comma."""
        assert encode_query({"categories": [1, 2, 3]}) == "?categories=1,2,3"

    def test_list_items_are_encoded_separately(self) -> None:
        """Commas inside an item are escaped; the separator comma is not."""
        assert encode_query({"slug": ["a b", "x,y"]}) == "?slug=a+b,x%2Cy"
        assert encode_query({"search": "x,y"}) == "?search=x%2Cy"

    def test_booleans_are_literals(self) -> None:
        assert encode_query({"hide_empty": False, "sticky": True}) == (
            "?hide_empty=false&sticky=true"
        )

    def test_values_are_percent_encoded(self) -> None:
        query = encode_query({"search": "hello world & more"})
        assert query == "?search=hello+world+%26+more"

    def test_preserves_insertion_order(self) -> None:
        assert encode_query({"b": 1, "a": 2}) == "?b=1&a=2"

    def test_accepts_pydantic_models_with_aliases(self) -> None:
        """Models drop unset fields and use wire names (``_embed``)."""
        params = ListPostsParams(per_page=5, embed=True)
        assert encode_query(params) == "?per_page=5&_embed=true"
