import io

HEADER = (
    "Country,ISO.alpha-3,Year,Total.CO2,Coal.CO2,Oil.CO2,Gas.CO2,Cement.CO2,Flaring.CO2,"
    "Per.Capita.CO2,Temp_Change,Total.Energy.Production,Renewables.and.other.Energy,CH4,Population\n"
)
ROWS = [
    "A,AAA,1980,400,200,100,80,20,0,4,0.2,50,5,10,100",
    "B,BBB,1980,200,50,100,40,10,0,8,0.4,30,3,6,25",
    "World,WLD,1980,400,100,200,80,20,0,5,0.3,80,2,4,125",
    "A,AAA,2021,1000,500,300,150,50,0,10,1.0,100,40,30,100",
    "B,BBB,2021,500,100,250,100,50,0,20,1.5,60,20,20,25",
    "World,WLD,2021,1500,600,550,250,100,0,12,1.2,160,60,50,125",
    "EU-27,,2021,300,100,100,80,20,0,6,1.1,40,30,10,50",
    "C,CCC,2021,0,0,0,0,0,0,0,0.5,1,1,1,3",
]


class RecordingSurface:
    """Stands in for a Streamlit placeholder and keeps every figure drawn on it."""

    def __init__(self):
        self.figures = []

    def draw(self, fig):
        self.figures.append(fig)

    @property
    def calls(self):
        return len(self.figures)


def csv_source(*rows, header=HEADER):
    return io.StringIO(header + "\n".join(rows) + "\n")
