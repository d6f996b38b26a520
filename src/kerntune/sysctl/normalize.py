"""
Conversion between the two spellings of a sysctl name.

``net.ipv4.ip_forward`` and ``net/ipv4/ip_forward`` name the same setting.
The first separator in the string decides which spelling it uses.
"""


def normalize(key: str) -> str:
    """
    Translate a dotted key into slash form.

    If the first separator is a slash, the string is already normalized and
    is returned untouched (dots stay dots). Otherwise dots become slashes and
    any later slash becomes a dot, so ``net.ipv4.conf.enp3s0/200.forwarding``
    maps to the interface ``enp3s0.200``.

    Examples:
        >>> normalize("net.ipv4.ip_forward")
        'net/ipv4/ip_forward'
        >>> normalize("/proc/sys/net.ipv4")
        '/proc/sys/net.ipv4'
        >>> normalize("kernel")
        'kernel'
    """
    seen_dot = False
    out = []
    for c in key:
        if c == "/":
            if not seen_dot:
                return key
            out.append(".")
        elif c == ".":
            seen_dot = True
            out.append("/")
        else:
            out.append(c)
    return "".join(out)
