"""Secret-word pool: one footballer is drawn per round."""

FOOTBALLERS = (
    "Lionel Messi",
    "Cristiano Ronaldo",
    "Diego Maradona",
    "Pelé",
    "Ronaldinho",
    "Zinedine Zidane",
    "Johan Cruyff",
    "Franz Beckenbauer",
    "Kylian Mbappé",
    "Erling Haaland",
    "Neymar",
    "Luka Modrić",
    "Andrés Iniesta",
    "Xavi Hernández",
    "Sergio Ramos",
    "Gerard Piqué",
    "Thierry Henry",
    "Zlatan Ibrahimović",
    "Robert Lewandowski",
    "Karim Benzema",
    "Mohamed Salah",
    "Kevin De Bruyne",
    "Manuel Neuer",
    "Gianluigi Buffon",
    "Iker Casillas",
    "Paolo Maldini",
    "Andrea Pirlo",
    "Francesco Totti",
    "Juan Román Riquelme",
    "Gabriel Batistuta",
    "Carlos Tevez",
    "Sergio Agüero",
    "Ángel Di María",
    "Emiliano Martínez",
    "Julián Álvarez",
    "Luis Suárez",
    "Edinson Cavani",
    "Alfredo Di Stéfano",
    "Ronaldo Nazário",
    "Kaká",
    "Roberto Carlos",
    "Thomas Müller",
    "Wayne Rooney",
    "David Beckham",
    "Steven Gerrard",
)
