"""同梱の英単語誤記テーブルと方言別つづりテーブル。

TYPOS: 誤記(小文字) -> 正しい表記。複数候補はカンマ区切り、空文字は「候補なしの誤り」。
VARIANTS: 同じ語の方言別つづり。各行は (american, british-ise, canadian, australian)。

ユーザー辞書(extend-identifiers / extend-words)はこれらより優先される。
"""
from __future__ import annotations

from typing import Dict, Tuple

from .config import Category

TYPOS: Dict[str, str] = {
    "abandonned": "abandoned",
    "aberation": "aberration",
    "abscence": "absence",
    "accesible": "accessible",
    "accidentaly": "accidentally",
    "accomodate": "accommodate",
    "accross": "across",
    "acheive": "achieve",
    "acknowlege": "acknowledge",
    "adress": "address",
    "agressive": "aggressive",
    "alot": "a lot",
    "alredy": "already",
    "amoung": "among",
    "anual": "annual",
    "apparant": "apparent",
    "appearence": "appearance",
    "arguement": "argument",
    "assertation": "assertion",
    "asyncronous": "asynchronous",
    "attribut": "attribute",
    "availabe": "available",
    "avaliable": "available",
    "becuase": "because",
    "beggining": "beginning",
    "beleive": "believe",
    "buisness": "business",
    "calender": "calendar",
    "cancelation": "cancellation",
    "charachter": "character",
    "commited": "committed",
    "comparision": "comparison",
    "compatability": "compatibility",
    "completly": "completely",
    "concensus": "consensus",
    "conditon": "condition",
    "configuraiton": "configuration",
    "conection": "connection",
    "consistant": "consistent",
    "containg": "containing",
    "convertion": "conversion",
    "curent": "current",
    "dependant": "dependent",
    "depreciated": "deprecated",
    "desciption": "description",
    "destory": "destroy",
    "dictionnary": "dictionary",
    "diffrent": "different",
    "directoy": "directory",
    "enviroment": "environment",
    "existant": "existent",
    "explicitely": "explicitly",
    "fucntion": "function",
    "funtion": "function",
    "guarentee": "guarantee",
    "heigth": "height",
    "hierachy": "hierarchy",
    "identifer": "identifier",
    "implemention": "implementation",
    "independant": "independent",
    "initalize": "initialize",
    "intial": "initial",
    "langauge": "language",
    "lenght": "length",
    "likelyhood": "likelihood",
    "mesage": "message",
    "neccessary": "necessary",
    "occured": "occurred",
    "occurence": "occurrence",
    "paramter": "parameter",
    "parrallel": "parallel",
    "persistant": "persistent",
    "posible": "possible",
    "preceed": "precede",
    "prefered": "preferred",
    "presense": "presence",
    "proccess": "process",
    "recieve": "receive",
    "recieved": "received",
    "recursivly": "recursively",
    "refered": "referred",
    "relevent": "relevant",
    "rendred": "rendered",
    "repositary": "repository",
    "reponse": "response",
    "retreive": "retrieve",
    "seperate": "separate",
    "seperator": "separator",
    "sucess": "success",
    "succesful": "successful",
    "suport": "support",
    "supress": "suppress",
    "teh": "the",
    "threshhold": "threshold",
    "tommorow": "tomorrow",
    "transfered": "transferred",
    "truely": "truly",
    "udpate": "update",
    "unkown": "unknown",
    "untill": "until",
    "usefull": "useful",
    "varaible": "variable",
    "wich": "which",
    "writting": "writing",
    # 候補が複数
    "ot": "to,of,or",
    "fo": "of,for",
    "thier": "their",
    "whith": "with",
    "ture": "true,pure",
    # 候補なしの誤り
    "dont": "",
}

_CATEGORIES = (Category.AMERICAN, Category.BRITISH_ISE, Category.CANADIAN, Category.AUSTRALIAN)

VARIANTS: Tuple[Tuple[str, str, str, str], ...] = (
    ("analyze", "analyse", "analyze", "analyse"),
    ("behavior", "behaviour", "behaviour", "behaviour"),
    ("catalog", "catalogue", "catalogue", "catalogue"),
    ("center", "centre", "centre", "centre"),
    ("color", "colour", "colour", "colour"),
    ("defense", "defence", "defence", "defence"),
    ("favorite", "favourite", "favourite", "favourite"),
    ("flavor", "flavour", "flavour", "flavour"),
    ("honor", "honour", "honour", "honour"),
    ("initialize", "initialise", "initialize", "initialise"),
    ("labeled", "labelled", "labelled", "labelled"),
    ("license", "licence", "licence", "licence"),
    ("modeling", "modelling", "modelling", "modelling"),
    ("neighbor", "neighbour", "neighbour", "neighbour"),
    ("normalize", "normalise", "normalize", "normalise"),
    ("optimize", "optimise", "optimize", "optimise"),
    ("organization", "organisation", "organization", "organisation"),
    ("program", "programme", "program", "program"),
    ("realize", "realise", "realize", "realise"),
    ("recognize", "recognise", "recognize", "recognise"),
    ("serialize", "serialise", "serialize", "serialise"),
    ("theater", "theatre", "theatre", "theatre"),
    ("traveled", "travelled", "travelled", "travelled"),
    ("utilize", "utilise", "utilize", "utilise"),
)


def _variant_index() -> Dict[str, Dict[Category, str]]:
    # つづり -> {方言: その方言でのつづり}
    index: Dict[str, Dict[Category, str]] = {}
    for row in VARIANTS:
        spellings = dict(zip(_CATEGORIES, row))
        for spelling in row:
            index[spelling] = spellings
    return index


VARIANT_INDEX = _variant_index()

__all__ = ["TYPOS", "VARIANTS", "VARIANT_INDEX"]
