# Text tokens that make up a rendered instruction; `asm_str` joins them.
from typing import List


class Token:
    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        return self.__dict__ == getattr(other, "__dict__", {})


def asm_str(parts: List[Token]) -> str:
    return "".join(str(part) for part in parts)


class TInstr(Token):
    def __init__(self, instr: str) -> None:
        self.instr = instr

    def __repr__(self) -> str:
        return f"TInstr({self.instr})"

    def __str__(self) -> str:
        return self.instr


class TSep(Token):
    def __init__(self, sep: str) -> None:
        self.sep = sep

    def __repr__(self) -> str:
        return f"TSep({self.sep})"

    def __str__(self) -> str:
        return self.sep


class TText(Token):
    def __init__(self, text: str) -> None:
        self.text = text

    def __repr__(self) -> str:
        return f"TText({self.text})"

    def __str__(self) -> str:
        return self.text


class TInt(Token):
    """Signed decimal integer operand."""

    def __init__(self, value: int) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"TInt({self.value})"

    def __str__(self) -> str:
        return str(self.value)


class TAddr(Token):
    """Absolute 16-bit address, printed unsigned."""

    def __init__(self, value: int) -> None:
        self.value = value & 0xFFFF

    def __repr__(self) -> str:
        return f"TAddr({self.value})"

    def __str__(self) -> str:
        return str(self.value)


class TBegMem(Token):
    def __repr__(self) -> str:
        return "TBegMem()"

    def __str__(self) -> str:
        return "["


class TEndMem(Token):
    def __repr__(self) -> str:
        return "TEndMem()"

    def __str__(self) -> str:
        return "]"


class TReg(Token):
    def __init__(self, reg: str) -> None:
        self.reg = reg

    def __repr__(self) -> str:
        return f"TReg({self.reg})"

    def __str__(self) -> str:
        return self.reg
