import json
import sys
from datetime import datetime

from panchang_api.services.orchestrators.panchang_assembler import get_assembler


def main() -> None:
    target = datetime.strptime(sys.argv[1], "%Y-%m-%d").date()
    city = sys.argv[2] if len(sys.argv) > 2 else None
    assembler = get_assembler()
    place, _flags = assembler.resolve(city)
    record = assembler.assemble(target, place)
    print(json.dumps(record.model_dump(by_alias=True), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python cli.py YYYY-MM-DD [city]")
        sys.exit(1)
    main()
