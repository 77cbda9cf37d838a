"""Built-in football trivia database."""

from .models import QuestionRecord

FOOTBALL_TRIVIA = (
    QuestionRecord("Which player won the Golden Boot at the 2010 World Cup?", "Thomas Müller"),
    QuestionRecord("Who is the all-time top scorer of the Premier League?", "Alan Shearer"),
    QuestionRecord("Which club has won the most Champions League titles?", "Real Madrid"),
    QuestionRecord("Who scored the 'Hand of God' goal in 1986?", "Diego Maradona"),
    QuestionRecord("Which nation hosted the first FIFA World Cup in 1930?", "Uruguay"),
    QuestionRecord("How many Ballon d'Or awards has Lionel Messi won?", "8"),
    QuestionRecord("Which team went unbeaten in the 2003-04 Premier League season?", "Arsenal"),
    QuestionRecord("Who managed Manchester United for 26 years?", "Sir Alex Ferguson"),
    QuestionRecord("What is the nickname of Juventus?", "The Old Lady"),
    QuestionRecord("Which goalkeeper captained Spain to the 2010 World Cup title?", "Iker Casillas"),
    QuestionRecord("Which stadium is the home of FC Barcelona?", "Camp Nou"),
    QuestionRecord("Who won the 2022 FIFA World Cup final?", "Argentina"),
    QuestionRecord("Which English club is known as The Toffees?", "Everton"),
    QuestionRecord("Who holds the record for most goals in a single Premier League season?", "Erling Haaland"),
    QuestionRecord("Which country has won the most FIFA World Cups?", "Brazil"),
    QuestionRecord("In which city is the San Siro stadium located?", "Milan"),
    QuestionRecord("Which player has made the most appearances for the England national team?", "Peter Shilton"),
    QuestionRecord("Which club did Cristiano Ronaldo join from Sporting CP in 2003?", "Manchester United"),
    QuestionRecord("Which African nation reached the World Cup semi-finals in 2022?", "Morocco"),
    QuestionRecord("Who won the Euro 2016 tournament?", "Portugal"),
)
