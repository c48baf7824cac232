"""Tests for schema type-block scanning."""

from dataconnect_gql.parsing import Field, GraphQLParser, TypeDefinition


class TestParseSchema:
    """Tests for GraphQLParser.parse_schema."""

    def test_table_type(self):
        """Test a type tagged as a table."""
        content = "type Movie @table {\n  id: String\n  title: String\n}\n"
        assert GraphQLParser().parse_schema(content) == [
            TypeDefinition(
                name="Movie",
                fields=[Field("id", "String"), Field("title", "String")],
                is_table=True,
            )
        ]

    def test_fields_on_header_line(self):
        """Test fields written on the header line."""
        content = "type Movie @table { id: String title: String }\n}\n"
        (movie,) = GraphQLParser().parse_schema(content)
        assert movie.name == "Movie"
        assert movie.is_table
        assert movie.fields == [Field("id", "String"), Field("title", "String")]

    def test_plain_type(self):
        """Test a type without the table directive."""
        (user,) = GraphQLParser().parse_schema("type User {\n  uid: ID!\n}\n")
        assert user.is_table is False
        assert user.fields == [Field("uid", "ID!")]

    def test_table_directive_with_arguments(self):
        """Test a table directive carrying arguments."""
        content = 'type Review @table(name: "reviews", key: ["movie", "user"]) {\n  rating: Int\n}\n'
        (review,) = GraphQLParser().parse_schema(content)
        assert review.is_table
        assert review.fields == [Field("rating", "Int")]

    def test_multiple_types(self):
        """Test several type blocks in one document."""
        content = (
            "type Movie @table {\n"
            "  title: String!\n"
            "  genres: [String]\n"
            "}\n"
            "\n"
            "type Actor {\n"
            "  name: String!\n"
            "}\n"
        )
        types = GraphQLParser().parse_schema(content)
        assert [t.name for t in types] == ["Movie", "Actor"]
        assert types[0].fields == [Field("title", "String!"), Field("genres", "[String]")]
        assert types[1].is_table is False

    def test_field_directives_ignored(self):
        """Test that field directives are not read as fields."""
        content = (
            "type Movie @table {\n"
            '  title: String! @col(name: "movie_title")\n'
            '  createdAt: Timestamp! @default(expr: "request.time")\n'
            "}\n"
        )
        (movie,) = GraphQLParser().parse_schema(content)
        assert movie.fields == [Field("title", "String!"), Field("createdAt", "Timestamp!")]

    def test_field_with_arguments(self):
        """Test a field declaring arguments."""
        content = "type Query {\n  movies(limit: Int): [Movie!]!\n}\n"
        (query,) = GraphQLParser().parse_schema(content)
        assert query.fields == [Field("movies", "[Movie!]!")]

    def test_lines_without_colon_ignored(self):
        """Test that lines without a colon are not fields."""
        content = "type Movie {\n  id: String\n  something\n}\n"
        (movie,) = GraphQLParser().parse_schema(content)
        assert movie.fields == [Field("id", "String")]

    def test_descriptions_suppressed(self):
        """Test that block descriptions are skipped."""
        content = (
            '"""\n'
            "type Hidden {\n"
            "  a: Int\n"
            "}\n"
            '"""\n'
            "type Movie {\n"
            '  """\n'
            "  note: this is not a field\n"
            '  """\n'
            "  id: String\n"
            "}\n"
        )
        types = GraphQLParser().parse_schema(content)
        assert [t.name for t in types] == ["Movie"]
        assert types[0].fields == [Field("id", "String")]

    def test_single_line_description_does_not_swallow_fields(self):
        """Test that a one-line description does not hide later fields."""
        content = 'type Movie {\n  """The title"""\n  title: String\n}\n'
        (movie,) = GraphQLParser().parse_schema(content)
        assert movie.fields == [Field("title", "String")]

    def test_commented_fields(self):
        """Test that commented fields are skipped."""
        content = "type Movie {\n  # old: Int\n  id: String\n}\n"
        (movie,) = GraphQLParser().parse_schema(content)
        assert movie.fields == [Field("id", "String")]

    def test_missing_close_flushed_by_next_header(self):
        """Test that a new header flushes an unclosed type."""
        content = "type A {\n  x: Int\ntype B {\n  y: Int\n}\n"
        types = GraphQLParser().parse_schema(content)
        assert [t.name for t in types] == ["A", "B"]
        assert types[0].fields == [Field("x", "Int")]

    def test_unterminated_type_at_end_is_dropped(self):
        """Test that an unclosed type at the end is dropped."""
        content = "type A {\n  x: Int\n}\ntype B {\n  y: Int\n"
        types = GraphQLParser().parse_schema(content)
        assert [t.name for t in types] == ["A"]

    def test_indented_closing_brace(self):
        """Test that the closing brace may be indented."""
        content = "type A {\n  x: Int\n    }\n"
        assert [t.name for t in GraphQLParser().parse_schema(content)] == ["A"]

    def test_no_types(self):
        """Test a document without type blocks."""
        assert GraphQLParser().parse_schema("query Q {\n  id\n}\n") == []

    def test_independent_of_operation_registry(self):
        """Test that schema scans leave the nested registry alone."""
        parser = GraphQLParser()
        parser.parse_schema("type A {\n  x: Int\n}\n")
        assert len(parser.nested_fields) == 0
