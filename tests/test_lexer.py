from txhistory.lexer import Token, TokenKind, tokenize, tokenize_with_text


def kinds(text):
    return [token.kind for token in tokenize(text)]


def test_basic_history():
    assert kinds("[x:=1 y:=1]\n[z==2]\n") == [
        TokenKind.BRACKET_OPEN,
        TokenKind.IDENT,
        TokenKind.COLON_EQUALS,
        TokenKind.INTEGER,
        TokenKind.WHITESPACE,
        TokenKind.IDENT,
        TokenKind.COLON_EQUALS,
        TokenKind.INTEGER,
        TokenKind.BRACKET_CLOSE,
        TokenKind.NEWLINE,
        TokenKind.BRACKET_OPEN,
        TokenKind.IDENT,
        TokenKind.DOUBLE_EQUALS,
        TokenKind.INTEGER,
        TokenKind.BRACKET_CLOSE,
        TokenKind.NEWLINE,
    ]


def test_comment_tokenization():
    ks = kinds("// this is a comment\n[x:=1]\n")
    assert ks[0] == TokenKind.COMMENT
    assert ks[1] == TokenKind.NEWLINE
    assert ks[2] == TokenKind.BRACKET_OPEN


def test_separator_tokenization():
    ks = kinds("---\n")
    assert ks[0] == TokenKind.DASH
    assert ks[1] == TokenKind.NEWLINE
    assert kinds("-\n")[0] == TokenKind.DASH
    assert kinds("----------\n")[0] == TokenKind.DASH


def test_operator_tokens():
    assert kinds(":= == ? !") == [
        TokenKind.COLON_EQUALS,
        TokenKind.WHITESPACE,
        TokenKind.DOUBLE_EQUALS,
        TokenKind.WHITESPACE,
        TokenKind.QUESTION_MARK,
        TokenKind.WHITESPACE,
        TokenKind.BANG,
    ]


def test_tokenize_with_text_spans():
    pairs = tokenize_with_text("[x:=42]")
    assert [text for _, text in pairs] == ["[", "x", ":=", "42", "]"]


def test_token_text_helper():
    source = "abc:=99"
    tokens = tokenize(source)
    assert tokens[0].text(source) == "abc"
    assert tokens[1].text(source) == ":="
    assert tokens[2].text(source) == "99"


def test_full_example():
    source = (
        "// session 1\n[x:=1 y:=1] [z==2 z:=3]\n[y:=3]\n---\n"
        "// session 2\n[a==1 b:=3] [c:=3]\n"
    )
    pairs = tokenize_with_text(source)
    assert pairs[0][0].kind == TokenKind.COMMENT
    assert pairs[0][1] == "// session 1"
    separators = [text for token, text in pairs if token.kind == TokenKind.DASH]
    assert separators[0] == "---"


def test_question_mark_and_bang():
    ks = kinds("[x==? y:=1]!")
    assert TokenKind.QUESTION_MARK in ks
    assert TokenKind.BANG in ks


def test_integer_and_ident():
    assert kinds("foo_bar 123 _under") == [
        TokenKind.IDENT,
        TokenKind.WHITESPACE,
        TokenKind.INTEGER,
        TokenKind.WHITESPACE,
        TokenKind.IDENT,
    ]


def test_span_correctness():
    tokens = tokenize("[abc]")
    assert tokens[0].span == (0, 1)
    assert tokens[1].span == (1, 4)
    assert tokens[2].span == (4, 5)


def test_unrecognised_characters_are_skipped():
    source = "[x@:=1]"
    pairs = tokenize_with_text(source)
    assert [text for _, text in pairs] == ["[", "x", ":=", "1", "]"]


def test_crlf_newline_is_one_token():
    tokens = tokenize("[x:=1]\r\n")
    assert tokens[-1] == Token(TokenKind.NEWLINE, 6, 8)


def test_tokens_cover_recognised_text_in_order():
    source = "// c\n[a==? b:=7]!\n---\n"
    tokens = tokenize(source)
    assert "".join(token.text(source) for token in tokens) == source
    assert all(a.end == b.start for a, b in zip(tokens, tokens[1:]))