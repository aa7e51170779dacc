"""Static VBA vocabulary: keywords, types, builtins, constants and signatures."""

from __future__ import annotations

from dataclasses import dataclass


KEYWORDS: tuple[str, ...] = (
    # Declarations
    "Dim", "ReDim", "Preserve", "Const", "Static", "Public", "Private", "Friend", "Global",
    # Procedures
    "Sub", "Function", "Property", "Get", "Let", "Set", "End", "Exit",
    # Control flow
    "If", "Then", "Else", "ElseIf", "Select", "Case", "For", "To", "Step", "Next", "Each",
    "In", "Do", "While", "Until", "Loop", "Wend", "With", "GoTo", "GoSub", "Return", "On",
    "Resume",
    # Error handling
    "Error",
    # Operators
    "And", "Or", "Xor", "Not", "Mod", "Like", "Is", "TypeOf",
    # Other
    "As", "ByVal", "ByRef", "Optional", "ParamArray", "Call", "New", "Me", "MyBase", "MyClass",
    # Boolean and special values
    "True", "False", "Nothing", "Empty", "Null",
)

TYPES: tuple[str, ...] = (
    "Integer", "Long", "Single", "Double", "Currency", "String", "Boolean", "Date",
    "Variant", "Object", "Byte", "LongLong", "LongPtr",
)

BUILTINS: tuple[str, ...] = (
    # Type conversion
    "CBool", "CByte", "CCur", "CDate", "CDbl", "CDec", "CInt", "CLng", "CLngLng", "CLngPtr",
    "CSng", "CStr", "CVar",
    # Strings
    "Len", "Left", "Right", "Mid", "Trim", "LTrim", "RTrim", "UCase", "LCase", "InStr",
    "InStrRev", "Replace", "Split", "Join", "StrComp", "Space", "String", "Asc", "Chr",
    "Format", "Val",
    # Math
    "Abs", "Sgn", "Int", "Fix", "Round", "Sqr", "Exp", "Log", "Sin", "Cos", "Tan", "Atn", "Rnd",
    # Dates
    "Now", "Date", "Time", "Year", "Month", "Day", "Hour", "Minute", "Second", "Weekday",
    "DateAdd", "DateDiff", "DatePart", "DateSerial", "DateValue", "TimeSerial", "TimeValue",
    # Arrays
    "Array", "LBound", "UBound", "IsArray",
    # Type checks
    "IsEmpty", "IsNull", "IsNumeric", "IsDate", "IsObject", "IsMissing", "TypeName", "VarType",
    # Other
    "MsgBox", "InputBox", "Debug", "Print",
)

SELF_REFERENCE_KEYWORD = "Me"

_KEYWORDS_BY_LOWER = {name.lower(): name for name in KEYWORDS}
_TYPES_BY_LOWER = {name.lower(): name for name in TYPES}
_BUILTINS_BY_LOWER = {name.lower(): name for name in BUILTINS}


def classify_word(word: str) -> str:
    """Return the token type for a bare identifier (type suffix already removed)."""
    key = str(word or "").lower()
    if key in _KEYWORDS_BY_LOWER:
        return "keyword"
    if key in _TYPES_BY_LOWER:
        return "type"
    if key in _BUILTINS_BY_LOWER:
        return "builtin"
    return "identifier"


KEYWORD_DOCS: dict[str, str] = {
    "Dim": "Declares variables and allocates storage space.",
    "ReDim": "Reallocates storage space for dynamic array variables.",
    "Preserve": "Keeps the data in an existing array when you change its last dimension.",
    "Const": "Declares constants for use in place of literal values.",
    "Static": "Declares variables that retain their values between calls.",
    "Public": "Declares variables or procedures accessible from all modules.",
    "Private": "Declares variables or procedures accessible only within the module.",
    "Friend": "Makes a class procedure visible throughout the project but not to controllers of the object.",
    "Global": "Declares a public variable in a standard module.",
    "Sub": "Declares a procedure that does not return a value.",
    "Function": "Declares a procedure that returns a value.",
    "Property": "Declares a property procedure (Get, Let or Set).",
    "End": "Ends a block or procedure.",
    "Exit": "Exits a block of Do, For, Function, Property or Sub code.",
    "If": "Conditionally executes a group of statements.",
    "ElseIf": "Tests an additional condition in an If block.",
    "Select": "Executes one of several groups of statements depending on an expression.",
    "For": "Repeats a group of statements a specified number of times.",
    "Each": "Repeats a group of statements for each element in an array or collection.",
    "Do": "Repeats a block of statements while or until a condition is True.",
    "While": "Executes statements as long as a condition is True.",
    "With": "Executes a series of statements on a single object.",
    "GoTo": "Branches unconditionally to a line label.",
    "On": "Enables an error-handling routine or branches on an expression.",
    "Resume": "Resumes execution after an error-handling routine finishes.",
    "Call": "Transfers control to a Sub or Function procedure.",
    "New": "Creates a new instance of a class.",
    "Me": "Refers to the instance of the class in which code is executing.",
    "ByVal": "Passes an argument by value.",
    "ByRef": "Passes an argument by reference.",
    "Optional": "Marks a parameter as not required.",
    "ParamArray": "Accepts an arbitrary number of arguments as a Variant array.",
    "Nothing": "Disassociates an object variable from an actual object.",
    "Empty": "Indicates an uninitialized variable.",
    "Null": "Indicates that a variable contains no valid data.",
    "True": "Boolean value True.",
    "False": "Boolean value False.",
    "TypeOf": "Tests the type of an object reference.",
    "Like": "Compares a string against a pattern.",
    "Mod": "Divides two numbers and returns only the remainder.",
}

TYPE_DOCS: dict[str, str] = {
    "Integer": "16-bit signed integer (-32,768 to 32,767).",
    "Long": "32-bit signed integer.",
    "Single": "Single-precision floating-point number.",
    "Double": "Double-precision floating-point number.",
    "Currency": "Scaled integer with four decimal places.",
    "String": "Variable-length character string.",
    "Boolean": "True or False.",
    "Date": "Date and time value.",
    "Variant": "Value of any type.",
    "Object": "Reference to any object.",
    "Byte": "8-bit unsigned integer (0 to 255).",
    "LongLong": "64-bit signed integer (64-bit hosts only).",
    "LongPtr": "Pointer-sized integer.",
}

# name -> (detail, documentation)
BUILTIN_DOCS: dict[str, tuple[str, str]] = {
    "CBool": ("Boolean", "Converts an expression to Boolean."),
    "CByte": ("Byte", "Converts an expression to Byte."),
    "CCur": ("Currency", "Converts an expression to Currency."),
    "CDate": ("Date", "Converts an expression to Date."),
    "CDbl": ("Double", "Converts an expression to Double."),
    "CDec": ("Decimal", "Converts an expression to Decimal."),
    "CInt": ("Integer", "Converts an expression to Integer."),
    "CLng": ("Long", "Converts an expression to Long."),
    "CLngLng": ("LongLong", "Converts an expression to LongLong (64-bit)."),
    "CLngPtr": ("LongPtr", "Converts an expression to LongPtr."),
    "CSng": ("Single", "Converts an expression to Single."),
    "CStr": ("String", "Converts an expression to String."),
    "CVar": ("Variant", "Converts an expression to Variant."),
    "Len": ("Long", "Returns the number of characters in a string."),
    "Left": ("String", "Returns characters from the left side of a string."),
    "Right": ("String", "Returns characters from the right side of a string."),
    "Mid": ("String", "Returns a specified number of characters from a string."),
    "Trim": ("String", "Returns a string without leading or trailing spaces."),
    "LTrim": ("String", "Returns a string without leading spaces."),
    "RTrim": ("String", "Returns a string without trailing spaces."),
    "UCase": ("String", "Converts a string to uppercase."),
    "LCase": ("String", "Converts a string to lowercase."),
    "InStr": ("Long", "Returns the position of a substring within a string."),
    "InStrRev": ("Long", "Returns the position of a substring from the end of a string."),
    "Replace": ("String", "Replaces occurrences of a substring within a string."),
    "Split": ("String()", "Returns a zero-based array of substrings."),
    "Join": ("String", "Joins array elements into a single string."),
    "StrComp": ("Integer", "Compares two strings."),
    "Space": ("String", "Returns a string consisting of spaces."),
    "String": ("String", "Returns a repeating character string."),
    "Asc": ("Integer", "Returns the character code of the first character."),
    "Chr": ("String", "Returns the character for a character code."),
    "Format": ("String", "Formats a value according to a format expression."),
    "Val": ("Double", "Returns the numeric value contained in a string."),
    "Abs": ("Number", "Returns the absolute value of a number."),
    "Sgn": ("Integer", "Returns the sign of a number (-1, 0 or 1)."),
    "Int": ("Number", "Returns the integer portion of a number."),
    "Fix": ("Number", "Returns the integer portion of a number, truncating toward zero."),
    "Round": ("Number", "Rounds a number to a number of decimal places."),
    "Sqr": ("Double", "Returns the square root of a number."),
    "Exp": ("Double", "Returns e raised to a power."),
    "Log": ("Double", "Returns the natural logarithm of a number."),
    "Sin": ("Double", "Returns the sine of an angle."),
    "Cos": ("Double", "Returns the cosine of an angle."),
    "Tan": ("Double", "Returns the tangent of an angle."),
    "Atn": ("Double", "Returns the arctangent of a number."),
    "Rnd": ("Single", "Returns a random number between 0 and 1."),
    "Now": ("Date", "Returns the current date and time."),
    "Date": ("Date", "Returns the current system date."),
    "Time": ("Date", "Returns the current system time."),
    "Year": ("Integer", "Returns the year component of a date."),
    "Month": ("Integer", "Returns the month component of a date."),
    "Day": ("Integer", "Returns the day component of a date."),
    "Hour": ("Integer", "Returns the hour component of a time."),
    "Minute": ("Integer", "Returns the minute component of a time."),
    "Second": ("Integer", "Returns the second component of a time."),
    "Weekday": ("Integer", "Returns the day of the week."),
    "DateAdd": ("Date", "Adds a time interval to a date."),
    "DateDiff": ("Long", "Returns the number of intervals between two dates."),
    "DatePart": ("Integer", "Returns a specified part of a date."),
    "DateSerial": ("Date", "Returns a date for a year, month and day."),
    "DateValue": ("Date", "Converts a string to a date."),
    "TimeSerial": ("Date", "Returns a time for an hour, minute and second."),
    "TimeValue": ("Date", "Converts a string to a time."),
    "Array": ("Variant()", "Creates an array from a list of values."),
    "LBound": ("Long", "Returns the lower bound of an array dimension."),
    "UBound": ("Long", "Returns the upper bound of an array dimension."),
    "IsArray": ("Boolean", "Returns True if a variable is an array."),
    "IsEmpty": ("Boolean", "Returns True if a variable is Empty."),
    "IsNull": ("Boolean", "Returns True if an expression is Null."),
    "IsNumeric": ("Boolean", "Returns True if an expression is numeric."),
    "IsDate": ("Boolean", "Returns True if an expression is a date."),
    "IsObject": ("Boolean", "Returns True if an expression is an object."),
    "IsMissing": ("Boolean", "Returns True if an optional argument was not passed."),
    "TypeName": ("String", "Returns the data type name of a variable."),
    "VarType": ("Integer", "Returns the subtype of a variable."),
    "MsgBox": ("Integer", "Displays a message in a dialog box."),
    "InputBox": ("String", "Displays a prompt for user input."),
    "Debug": ("Object", "Debug object for output to the Immediate window."),
    "Print": ("Sub", "Outputs text to the Immediate window."),
}

# name -> (detail, documentation)
CONSTANTS: dict[str, tuple[str, str]] = {
    "vbCrLf": ("String", "Carriage return and line feed characters."),
    "vbCr": ("String", "Carriage return character."),
    "vbLf": ("String", "Line feed character."),
    "vbTab": ("String", "Tab character."),
    "vbNullChar": ("String", "Null character."),
    "vbNullString": ("String", "Null string."),
    "vbNewLine": ("String", "Platform-specific newline."),
    "vbOK": ("Integer = 1", "MsgBox result: OK button."),
    "vbCancel": ("Integer = 2", "MsgBox result: Cancel button."),
    "vbYes": ("Integer = 6", "MsgBox result: Yes button."),
    "vbNo": ("Integer = 7", "MsgBox result: No button."),
    "vbOKOnly": ("Integer = 0", "MsgBox buttons: OK only."),
    "vbOKCancel": ("Integer = 1", "MsgBox buttons: OK and Cancel."),
    "vbYesNoCancel": ("Integer = 3", "MsgBox buttons: Yes, No and Cancel."),
    "vbYesNo": ("Integer = 4", "MsgBox buttons: Yes and No."),
    "vbCritical": ("Integer = 16", "MsgBox icon: Critical."),
    "vbQuestion": ("Integer = 32", "MsgBox icon: Question."),
    "vbExclamation": ("Integer = 48", "MsgBox icon: Exclamation."),
    "vbInformation": ("Integer = 64", "MsgBox icon: Information."),
    "vbBinaryCompare": ("Integer = 0", "Performs a binary comparison."),
    "vbTextCompare": ("Integer = 1", "Performs a textual comparison."),
}


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    name: str
    type: str | None = None
    is_optional: bool = False
    description: str | None = None


@dataclass(frozen=True, slots=True)
class BuiltinSignature:
    name: str
    params: tuple[ParameterInfo, ...]
    return_type: str | None = None


def _sig(name: str, return_type: str | None, *params: tuple) -> BuiltinSignature:
    built = tuple(ParameterInfo(*param) for param in params)
    return BuiltinSignature(name=name, params=built, return_type=return_type)


_BUILTIN_SIGNATURE_LIST: tuple[BuiltinSignature, ...] = (
    _sig(
        "MsgBox", "VbMsgBoxResult",
        ("Prompt", "String", False), ("Buttons", "VbMsgBoxStyle", True), ("Title", "String", True),
        ("HelpFile", "String", True), ("Context", "Long", True),
    ),
    _sig(
        "InputBox", "String",
        ("Prompt", "String", False), ("Title", "String", True), ("Default", "String", True),
        ("XPos", "Long", True), ("YPos", "Long", True),
    ),
    _sig("Left", "String", ("String", "String", False), ("Length", "Long", False)),
    _sig("Right", "String", ("String", "String", False), ("Length", "Long", False)),
    _sig("Mid", "String", ("String", "String", False), ("Start", "Long", False), ("Length", "Long", True)),
    _sig("Len", "Long", ("Expression", "Variant", False)),
    _sig("Trim", "String", ("String", "String", False)),
    _sig("UCase", "String", ("String", "String", False)),
    _sig("LCase", "String", ("String", "String", False)),
    _sig(
        "InStr", "Long",
        ("Start", "Long", True), ("String1", "String", False), ("String2", "String", False),
        ("Compare", "VbCompareMethod", True),
    ),
    _sig(
        "InStrRev", "Long",
        ("StringCheck", "String", False), ("StringMatch", "String", False), ("Start", "Long", True),
        ("Compare", "VbCompareMethod", True),
    ),
    _sig(
        "Replace", "String",
        ("Expression", "String", False), ("Find", "String", False), ("Replace", "String", False),
        ("Start", "Long", True), ("Count", "Long", True), ("Compare", "VbCompareMethod", True),
    ),
    _sig(
        "Split", "String()",
        ("Expression", "String", False), ("Delimiter", "String", True), ("Limit", "Long", True),
        ("Compare", "VbCompareMethod", True),
    ),
    _sig("Join", "String", ("SourceArray", "Variant()", False), ("Delimiter", "String", True)),
    _sig(
        "StrComp", "Integer",
        ("String1", "String", False), ("String2", "String", False), ("Compare", "VbCompareMethod", True),
    ),
    _sig("Format", "String", ("Expression", "Variant", False), ("Format", "String", True)),
    _sig(
        "DateAdd", "Date",
        ("Interval", "String", False), ("Number", "Double", False), ("Date", "Date", False),
    ),
    _sig(
        "DateDiff", "Long",
        ("Interval", "String", False), ("Date1", "Date", False), ("Date2", "Date", False),
        ("FirstDayOfWeek", "VbDayOfWeek", True), ("FirstWeekOfYear", "VbFirstWeekOfYear", True),
    ),
    _sig("DateSerial", "Date", ("Year", "Integer", False), ("Month", "Integer", False), ("Day", "Integer", False)),
    _sig("Round", "Double", ("Number", "Double", False), ("NumDigitsAfterDecimal", "Integer", True)),
    _sig("Array", "Variant()", ("ArgList", "Variant", False, "Elements to include in array")),
    _sig("UBound", "Long", ("Array", "Variant", False), ("Dimension", "Long", True)),
    _sig("LBound", "Long", ("Array", "Variant", False), ("Dimension", "Long", True)),
)

_BUILTIN_SIGNATURES_BY_LOWER = {sig.name.lower(): sig for sig in _BUILTIN_SIGNATURE_LIST}


def builtin_signature(name: str) -> BuiltinSignature | None:
    return _BUILTIN_SIGNATURES_BY_LOWER.get(str(name or "").lower())
