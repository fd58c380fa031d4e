import struct

def read_s16_be(data, offset=0):
    return struct.unpack('>h', data[offset:offset+2])[0]

def parse_coefficient_list(text):
    """
    Parses a comma separated list of 16 coefficients as given on the command line.
    Accepts decimal or 0x-prefixed hex (hex values are read as raw s16 bit patterns).
    """
    values = []
    for part in text.split(','):
        part = part.strip()
        if not part:
            continue
        if part.lower().startswith('0x'):
            raw = int(part, 16)
            if raw > 0xFFFF:
                raise ValueError(f"Hex coefficient {part} does not fit in 16 bits")
            values.append(raw - 0x10000 if raw & 0x8000 else raw)
        else:
            values.append(int(part))
    return values
