# seed_riders.py
from flatjudge.run import api
from flatjudge.models import Rider
from flatjudge.helpers.riders import create_rider
from flatjudge.helpers.judges import get_judges, create_judge

def main(num_riders=12, num_judges=3):
    with api.app_context():
        existing = Rider.query.count()
        print(f"Existing riders: {existing}")

        for i in range(num_riders):
            n = existing + i + 1
            create_rider(f"Test Rider {n}", rider_name=f"RIDER{n}")

        if not get_judges():
            for i in range(num_judges):
                create_judge(f"Judge {i + 1}")

        print(f"Now have {Rider.query.count()} riders and {len(get_judges())} judges.")

if __name__ == "__main__":
    main()
