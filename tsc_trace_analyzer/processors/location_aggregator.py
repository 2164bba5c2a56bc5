"""
Aggregation of check-phase events by AST node range.
"""

from typing import Dict, List, Tuple

from ..core.types import CodeLocation, FileLocationDetails, ProcessedEvent
from ..extractors import ArgsExtractor

# Locations at or below this many milliseconds are noise
DEFAULT_LOCATION_THRESHOLD_MS = 0.1

# Common TypeScript SyntaxKind codes
SYNTAX_KIND_NAMES: Dict[int, str] = {
    # Literals
    9: 'NumericLiteral',
    10: 'BigIntLiteral',
    11: 'StringLiteral',
    14: 'RegularExpressionLiteral',
    15: 'NoSubstitutionTemplateLiteral',

    # Names and keywords
    79: 'Identifier',
    80: 'PrivateIdentifier',
    95: 'FalseKeyword',
    104: 'NullKeyword',
    106: 'ThisKeyword',
    108: 'SuperKeyword',
    110: 'TrueKeyword',

    # Types
    182: 'TypeReference',
    183: 'FunctionType',
    184: 'ConstructorType',
    185: 'TypeQuery',
    186: 'TypeLiteral',
    187: 'ArrayType',
    188: 'TupleType',
    189: 'OptionalType',
    190: 'RestType',
    191: 'UnionType',
    192: 'IntersectionType',
    193: 'ConditionalType',
    194: 'InferType',
    195: 'ParenthesizedType',
    196: 'ThisType',
    197: 'TypeOperator',
    198: 'IndexedAccessType',
    199: 'MappedType',
    200: 'LiteralType',
    201: 'NamedTupleMember',
    202: 'TemplateLiteralType',

    # Expressions
    209: 'ArrayLiteralExpression',
    210: 'ObjectLiteralExpression',
    211: 'PropertyAccessExpression',
    212: 'ElementAccessExpression',
    213: 'CallExpression',
    214: 'NewExpression',
    216: 'TypeAssertionExpression',
    217: 'ParenthesizedExpression',
    218: 'FunctionExpression',
    219: 'ArrowFunction',
    220: 'DeleteExpression',
    221: 'TypeOfExpression',
    222: 'VoidExpression',
    223: 'AwaitExpression',
    224: 'PrefixUnaryExpression',
    225: 'PostfixUnaryExpression',
    226: 'BinaryExpression',
    227: 'ConditionalExpression',
    228: 'TemplateExpression',
    229: 'YieldExpression',
    230: 'SpreadElement',
    231: 'ClassExpression',
    233: 'OmittedExpression',
    234: 'ExpressionWithTypeArguments',
    235: 'AsExpression',
    236: 'NonNullExpression',
    237: 'MetaProperty',
    238: 'TaggedTemplateExpression',
    239: 'SatisfiesExpression',

    # Statements
    243: 'Block',
    244: 'EmptyStatement',
    245: 'VariableStatement',
    246: 'ExpressionStatement',
    247: 'IfStatement',
    248: 'DoStatement',
    249: 'WhileStatement',
    250: 'ForStatement',
    251: 'ForInStatement',
    252: 'ForOfStatement',
    253: 'ContinueStatement',
    254: 'BreakStatement',
    255: 'ReturnStatement',
    256: 'WithStatement',
    257: 'SwitchStatement',
    258: 'LabeledStatement',
    259: 'ThrowStatement',
    260: 'TryStatement',

    # Declarations
    262: 'FunctionDeclaration',
    263: 'ClassDeclaration',
    264: 'InterfaceDeclaration',
    265: 'TypeAliasDeclaration',
    266: 'EnumDeclaration',
    267: 'ModuleDeclaration',

    # JSX
    283: 'JsxElement',
    284: 'JsxSelfClosingElement',
    285: 'JsxOpeningElement',
    286: 'JsxClosingElement',
    287: 'JsxFragment',
    290: 'JsxAttribute',
    291: 'JsxSpreadAttribute',
    292: 'JsxExpression',

    # Other
    303: 'SourceFile',
    308: 'JSDocComment',
}


def get_syntax_kind_name(kind: int) -> str:
    """Return the SyntaxKind name of a node kind code, e.g. 213 -> 'CallExpression'."""
    return SYNTAX_KIND_NAMES.get(kind, f"SyntaxKind({kind})")


class LocationAggregator:
    """Finds slow AST node ranges within a file."""

    def __init__(self, threshold_ms: float = DEFAULT_LOCATION_THRESHOLD_MS):
        """
        Initialize with the noise threshold.

        Args:
            threshold_ms: Locations whose total duration is at or below this
                          value are dropped
        """
        self.threshold_ms = threshold_ms

    def extract_locations_from_file(
        self,
        events: List[ProcessedEvent],
        file_path: str,
        short_path: str
    ) -> FileLocationDetails:
        """
        Aggregate a file's events by (pos, end) range.

        For each range the durations are summed and sourceId/targetId type
        references are accumulated. The kind and event name come from the
        first event seen; the first event carrying a code snippet provides
        the snippet, line and column. Events without pos/end are ignored.

        Args:
            events: Events of one file
            file_path: Full path of the file
            short_path: Display path of the file

        Returns:
            FileLocationDetails with locations above the threshold, slowest
            first, and their summed time
        """
        locations: Dict[Tuple[int, int], CodeLocation] = {}

        for event in events:
            position = ArgsExtractor.extract_position(event.args)
            if position is None:
                continue

            args = event.args
            type_ids = ArgsExtractor.extract_type_ids(args)
            code_snippet, line_number, column_number = ArgsExtractor.extract_snippet_info(args)

            existing = locations.get(position)
            if existing is None:
                kind = args.get('kind')
                if kind is None:
                    kind = 0
                locations[position] = CodeLocation(
                    pos=position[0],
                    end=position[1],
                    kind=kind,
                    kind_name=get_syntax_kind_name(kind),
                    duration=event.duration,
                    event_name=event.name,
                    type_ids=type_ids or None,
                    code_snippet=code_snippet,
                    line_number=line_number,
                    column_number=column_number,
                )
                continue

            existing.duration += event.duration
            if type_ids:
                existing.type_ids = (existing.type_ids or []) + type_ids
            if not existing.code_snippet and code_snippet:
                existing.code_snippet = code_snippet
                existing.line_number = line_number
                existing.column_number = column_number

        slow = [loc for loc in locations.values() if loc.duration > self.threshold_ms]
        slow.sort(key=lambda loc: loc.duration, reverse=True)

        return FileLocationDetails(
            file_path=file_path,
            short_path=short_path,
            total_time=sum(loc.duration for loc in slow),
            locations=slow,
        )

    def get_file_location_details(
        self,
        events: List[ProcessedEvent],
        file_path: str,
        short_path: str
    ) -> FileLocationDetails:
        """
        Select the events of one file that carry pos/end, then aggregate them.

        Args:
            events: Events of any number of files
            file_path: File to report on
            short_path: Display path of the file
        """
        file_events = [
            e for e in events
            if e.file_path == file_path and ArgsExtractor.extract_position(e.args) is not None
        ]
        return self.extract_locations_from_file(file_events, file_path, short_path)
