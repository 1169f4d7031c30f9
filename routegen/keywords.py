"""TypeScript reserved words that cannot name a namespace."""

KEYWORDS: frozenset[str] = frozenset({
    # reserved words
    "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "enum", "export", "extends", "false",
    "finally", "for", "function", "if", "import", "in", "instanceof", "new",
    "null", "return", "super", "switch", "this", "throw", "true", "try",
    "typeof", "var", "void", "while", "with",
    # strict mode reserved words
    "as", "implements", "interface", "let", "package", "private",
    "protected", "public", "static", "yield",
    # contextual keywords that break namespace declarations
    "any", "await", "boolean", "declare", "module", "namespace", "never",
    "number", "string", "symbol", "type", "undefined", "unknown",
})
